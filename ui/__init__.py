"""
UI Modules for Trip Planner

- trip_list: landing page with every trip
- trip_tabs: schedule / bookings / expenses / checklist inside a trip
- common: shared helpers (loading caption, write feedback)
"""
