"""
coursecal – merged course schedule with tasks, teacher links and .ics export.
"""
