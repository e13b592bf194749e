"""
Medicine Reminder backend package.

Caregivers register recipients and medication schedules; a periodic scan
emails a reminder when a dose time comes due.
"""
