"""
NoteShelf Backend — API Routes Package
=======================================

Route Inventory:
    - notes.py:   GET    /notes             (list, optional ?search=)
                  POST   /notes             (create)
                  PUT    /notes/{note_id}   (update)
                  DELETE /notes/{note_id}   (delete)

Routes are thin: they read the request, call NoteService and return its
response model. Validation and status decisions live in the service and in
the exception handlers registered by main.py.
"""
