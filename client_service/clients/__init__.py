"""
Client accounts module.

This module provides:
- Client registration with email and SMS OTP verification
- Password login issuing access/refresh tokens
- Refresh token rotation and logout
- Profile updates and paginated listing
"""
