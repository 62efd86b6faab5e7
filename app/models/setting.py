from app import db


class Setting(db.Model):
    """Simple key/value application settings (current week, ...)"""

    __tablename__ = "settings"

    key = db.Column(db.String(50), primary_key=True)
    value = db.Column(db.String(200), nullable=False)

    def __repr__(self):
        return f"<Setting {self.key}={self.value}>"

    @staticmethod
    def get_value(key, default=None):
        setting = db.session.get(Setting, key)
        return setting.value if setting else default

    @staticmethod
    def set_value(key, value):
        setting = db.session.get(Setting, key)
        if setting is None:
            setting = Setting(key=key, value=str(value))
            db.session.add(setting)
        else:
            setting.value = str(value)
        return setting
