# Services package init
"""
MedTrack Backend: Services Layer
==================================

Service Inventory:
    - medication_status: pure status calculator (no clock, no I/O)
    - MedicationService: medication store; persists records and attaches
      a computed status to each one it returns
"""
