# Routes package init
"""
StudyHub Backend - API Routes Package
=======================================

Route Inventory:
    - payments.py: POST /api/v1/payment/capturePayment
                   POST /api/v1/payment/verifyPayment
                   POST /api/v1/payment/sendPaymentSuccessEmail
    - profile.py:  /api/v1/profile/* (account, avatar, courses, dashboard)
    - health.py:   GET /health

Routes stay thin: read the request, call a service, wrap the result in
ApiResponse. Business rules live in studyhub.services.
"""
