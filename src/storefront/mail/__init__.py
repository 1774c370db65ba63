"""
HTML email composition: plain-text alternatives, multipart messages with
attachments, and SMTP delivery.
"""
