"""Hostel Pass package.

Leave requests for hostel students: warden approval and QR-scanned exit/return
tracked by security. Organized by feature modules (leaves, users) with a thin
Flask controller layer over service/repository layers.
"""
