from messenger.models.base import Base
from messenger.models.messenger_setting import MessengerSetting

__all__ = ["Base", "MessengerSetting"]
