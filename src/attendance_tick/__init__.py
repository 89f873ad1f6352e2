"""Attendance Tick package.

Employees tick predefined daily time slots. The package is organized by
feature modules (slots, ticks, store, reports) with a thin Flask controller
layer over service and store layers.
"""
