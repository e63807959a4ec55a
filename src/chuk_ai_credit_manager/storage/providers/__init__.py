# chuk_ai_credit_manager/storage/providers/__init__.py
