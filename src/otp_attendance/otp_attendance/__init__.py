"""OTP Attendance package.

Organized by feature modules (credentials, attendance, reports) with a thin
Flask controller layer over service/repository layers.
"""
