"""
Outbound notifications (email and SMS) used to deliver verification codes.
"""
