# Routes package init
"""
DevFlow Backend — API Routes Package
======================================

Route Inventory:
    - users.py:         /api/users ...
    - accounts.py:      /api/accounts
    - auth.py:          /api/auth/sign-up, /api/auth/sign-in
    - questions.py:     /api/questions ... (answers nested under a question)
    - votes.py:         /api/votes, /api/votes/status
    - collections.py:   /api/collections ...
    - tags.py:          /api/tags ...
    - interactions.py:  /api/interactions, /api/search
    - health.py:        /health

Routes are thin: collect raw input, call the action, render the envelope
with `envelope.respond`. Validation lives in the Action Guard.
"""
