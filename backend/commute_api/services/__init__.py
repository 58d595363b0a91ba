# Services package init
"""
Commute Match Backend — Services Layer
=======================================

What:  Business rules sitting between routes (HTTP) and repositories.
How:   Each service receives its repositories (and, for UserService, the
       password hasher and token signer) at construction. Routes obtain
       them through the providers in `commute_api.dependencies`.

Service Inventory:
    - JourneyService:              journey validation, CRUD, route/similar search, stats
    - UserService:                 register, login, profile, admin user listing
    - MatchingPreferencesService:  preferences CRUD
    - ChatService:                 chats, messages, group administration
    - validation.py:               HH:mm, age range and preference document rules
"""
