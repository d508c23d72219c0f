"""
Client service: registration, OTP verification and JWT authentication for clients.
"""
