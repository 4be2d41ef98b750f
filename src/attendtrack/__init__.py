"""AttendTrack: classroom attendance with course QR codes.

The package is organized by feature modules (accounts, courses, attendance,
analytics, qr) with a thin Flask controller layer over service/repository layers.
"""
