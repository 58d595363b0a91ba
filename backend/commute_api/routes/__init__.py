# Routes package init
"""
Commute Match Backend — API Routes Package
===========================================

What:  HTTP route handlers; each module owns one resource.

Route Inventory:
    - journeys.py:     /api/journeys...
    - users.py:        /api/users/register, /login, /profile, /update-profile
    - preferences.py:  /api/preferences
    - chats.py:        /api/chats...
    - admin.py:        /api/admin/users
    - health.py:       /health

Routes stay thin: extract input, call a service obtained through
`commute_api.dependencies`, wrap the result in the response envelope.
Errors are raised, never returned; main.py's handlers serialize them.
"""
