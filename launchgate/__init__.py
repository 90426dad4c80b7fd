"""LaunchGate: social signal classification and launch-decision pipeline.

Ingests posts and messages from Twitter/X, Discord, Telegram, and Reddit,
scores them for actionability and risk, tracks launch candidates with
at-most-once execution, and gates automated token deployment behind a
configurable policy.

Example:
    from launchgate.service import LaunchGateService
    from launchgate.settings import get_settings

    service = LaunchGateService.from_settings(get_settings(), executor)
    await service.start()
    await service.intake("discord", message_payload)
"""

__version__ = "0.4.0"
