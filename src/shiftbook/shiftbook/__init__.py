"""Shiftbook package.

Small-business HR core organized by feature modules (employees, schedules,
timeclock, timeoff, payroll) with a thin Flask JSON controller layer over
service and repository layers.
"""
