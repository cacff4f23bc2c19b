# Services package init
"""
DevFlow Backend — Services Layer
==================================

What:  The actions: every read and mutation the API offers, each passing
       through the Action Guard (`guard.server_action`) and returning an
       ActionResponse envelope.
Why:   Routes handle HTTP; services own validation, authorization,
       transactions and error normalization, so they can be called and
       tested without HTTP.

Service Inventory:
    - guard.py:               Action Guard, AuthSession, handle_error
    - queries.py:             pagination + author/tag hydration helpers
    - question_service.py:    create/edit/get/list questions, views, hot list
    - answer_service.py:      create answer (+answer_count), list answers
    - vote_service.py:        vote state machine, has_voted, counter helper
    - collection_service.py:  save toggle, has_saved, saved list
    - user_service.py:        users, profile totals, user content
    - account_service.py:     provider accounts
    - auth_service.py:        credential sign-up / sign-in
    - tag_service.py:         tags, top tags, tag questions
    - interaction_service.py: activity records
    - search_service.py:      global search
    - fetch.py:               outbound HTTP → ActionResponse
"""
