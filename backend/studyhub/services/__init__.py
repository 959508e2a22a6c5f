# Services package init
"""
StudyHub Backend - Services Layer
===================================

Service Inventory:
    - PaymentService:    cart pricing, gateway orders, signature check, receipt
    - EnrollmentService: roster, progress record and course link per course
    - ProfileService:    account edits, avatar, enrolled courses, dashboard
    - RazorpayGateway:   Orders API + payment signature (adapter)
    - CloudinaryUploader: signed image uploads (adapter)
    - MailService:       SMTP delivery (adapter)

Each is a stateless module-level singleton; callers pass the request's
AsyncSession in.
"""
