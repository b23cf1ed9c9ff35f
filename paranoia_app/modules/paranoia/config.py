class ParanoiaDefaultConfig:
    """Default configuration for the Paranoia module."""

    SETTINGS_KEY = 'paranoia.settings'

    # Flat keys used before settings were stored as one record.
    LEGACY_ACCESS_THRESHOLD_KEY = 'PARANOIA_ACCESS_THRESHOLD'
    LEGACY_EMAIL_NOTIFICATION_KEY = 'PARANOIA_EMAIL_NOTIFICATION'

    ACCESS_THRESHOLD = 0  # days; 0 disables stale-account resets
    EMAIL_NOTIFICATION = False

    # Choices offered on the settings page, in days.
    ACCESS_THRESHOLD_CHOICES = (0, 30, 60, 90, 180, 365)

    RESET_QUEUE = 'paranoia_reset_password'
    EXPIRED_MAIL_KEY = 'paranoia_expired'

    CRON_BATCH_SIZE = 100
    QUEUE_TIME_LIMIT = 60
