"""qrwork package.

Multi-tenant QR attendance service, organized by feature modules (companies,
employees, qrcodes, attendance, leave, ...) with a thin Flask controller layer
over service/repository layers.
"""
