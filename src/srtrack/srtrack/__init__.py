"""SRTrack package.

Attendance tracking for trainees: clock in/out lifecycle, the nightly overdue
sweep and commander notifications. Organized by feature modules (trainees,
attendance, notifications, ...) with thin Flask controllers over service and
repository layers.
"""
