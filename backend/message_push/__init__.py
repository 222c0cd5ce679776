"""
Message push notification backend package.

This package contains:
- main: FastAPI application entrypoint
- store: read-only access to conversations / profiles / preferences / push tokens
- gateway: Expo push gateway client
- notifications: message-event notification dispatcher (/functions/v1/send-message-notification)
- push: generic per-user push sending (/push/users/{user_id})
"""
