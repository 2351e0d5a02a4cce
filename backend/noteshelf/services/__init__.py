"""
NoteShelf Backend — Services Layer
===================================

Service Inventory:
    - NoteService: input validation/normalization on top of NoteStore, and
      conversion of "no row changed" into NotFoundError
"""
