"""
Services module for business logic.

- domain/: application services (orders, kitchen, payments, KTV, hotel, finance)
- audit: AuditSink protocol and default sinks
- printing: ReceiptPrinter protocol and the logging printer
"""
