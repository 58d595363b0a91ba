# Schemas package init
"""
Commute Match Backend — API Contracts
======================================

What:  Pydantic request/response models, separate from the ORM models.

Module Inventory:
    - common.py:   ApiResponse envelope, HealthResponse
    - journey.py:  JourneyCreate/Update/Query, JourneyResponse, JourneyStats
    - user.py:     registration, login, profile, matching preferences
    - chat.py:     chats, messages, participants
"""
