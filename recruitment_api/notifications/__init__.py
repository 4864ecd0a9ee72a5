"""
Outbound notifications: SMTP email delivery with retry and exponential
backoff, and the login notification sent after a successful sign-in.
"""
