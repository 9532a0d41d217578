import os
import configparser
from pathlib import Path

CONFIG_PATH_ENV = 'INVENTORY_REPLENISHMENT_CONFIG'

DEFAULT_SETTINGS = {
    'DATABASE': {
        'url': 'sqlite:///inventory.db',
        'echo': 'False'
    },
    'LOGGING': {
        'level': 'INFO',
        'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        'directory': 'logs',
        'max_size_mb': '10',
        'backup_count': '5',
        'console_output': 'True',
        'file_output': 'True'
    },
    'BUSINESS_RULES': {
        'default_ordering_cost': '50',
        'default_holding_cost_rate': '0.2',
        'default_lead_time_days': '7',
        'default_demand_variability': '0.1',
        'default_service_level': '0.95',
        'service_level_threshold': '0.95',
        'z_score_strategy': 'two_bucket',  # two_bucket | normal
        'reorder_point_source': 'stored',  # stored | calculated
        'forecast_days': '30'
    },
    'MONITOR': {
        'interval_minutes': '60'
    }
}


class Config:
    """Configuration manager for the Inventory Replenishment Engine."""

    _instance = None

    def __new__(cls):
        """Singleton pattern implementation."""
        if cls._instance is None:
            cls._instance = super(Config, cls).__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        """Initialize the configuration if not already initialized."""
        if self._initialized:
            return

        self._config_path = Path(os.getenv(CONFIG_PATH_ENV, 'config/settings.ini'))
        self._config = configparser.ConfigParser(interpolation=None)
        self._config.read_dict(DEFAULT_SETTINGS)

        # File values override the built-in defaults
        if self._config_path.exists():
            self._config.read(self._config_path)

        self._initialized = True

    def save(self):
        """Save configuration to file."""
        self._config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self._config_path, 'w') as configfile:
            self._config.write(configfile)

    def get(self, section, key, default=None):
        """Get configuration value."""
        try:
            return self._config.get(section, key)
        except (configparser.NoSectionError, configparser.NoOptionError):
            return default

    def get_int(self, section, key, default=None):
        """Get configuration value as integer."""
        try:
            return self._config.getint(section, key)
        except (configparser.NoSectionError, configparser.NoOptionError, ValueError):
            return default

    def get_float(self, section, key, default=None):
        """Get configuration value as float."""
        try:
            return self._config.getfloat(section, key)
        except (configparser.NoSectionError, configparser.NoOptionError, ValueError):
            return default

    def get_boolean(self, section, key, default=None):
        """Get configuration value as boolean."""
        try:
            return self._config.getboolean(section, key)
        except (configparser.NoSectionError, configparser.NoOptionError, ValueError):
            return default

    def set(self, section, key, value, persist=True):
        """Set configuration value.

        Args:
            section: Section name
            key: Option name
            value: New value (stored as string)
            persist: Write the configuration file after updating
        """
        if not self._config.has_section(section):
            self._config.add_section(section)

        self._config.set(section, key, str(value))
        if persist:
            self.save()

    def get_db_url(self):
        """Get SQLAlchemy database URL."""
        return self.get('DATABASE', 'url', 'sqlite:///inventory.db')

    @property
    def log_config(self):
        """Get logging configuration."""
        return {
            'level': self.get('LOGGING', 'level', 'INFO'),
            'format': self.get('LOGGING', 'format', '%(asctime)s - %(name)s - %(levelname)s - %(message)s'),
            'directory': self.get('LOGGING', 'directory', 'logs'),
            'max_size_mb': self.get_int('LOGGING', 'max_size_mb', 10),
            'backup_count': self.get_int('LOGGING', 'backup_count', 5),
            'console_output': self.get_boolean('LOGGING', 'console_output', True),
            'file_output': self.get_boolean('LOGGING', 'file_output', True)
        }

    @property
    def business_rules(self):
        """Get business rules configuration."""
        return {
            'default_ordering_cost': self.get_float('BUSINESS_RULES', 'default_ordering_cost', 50.0),
            'default_holding_cost_rate': self.get_float('BUSINESS_RULES', 'default_holding_cost_rate', 0.2),
            'default_lead_time_days': self.get_int('BUSINESS_RULES', 'default_lead_time_days', 7),
            'default_demand_variability': self.get_float('BUSINESS_RULES', 'default_demand_variability', 0.1),
            'default_service_level': self.get_float('BUSINESS_RULES', 'default_service_level', 0.95),
            'service_level_threshold': self.get_float('BUSINESS_RULES', 'service_level_threshold', 0.95),
            'z_score_strategy': self.get('BUSINESS_RULES', 'z_score_strategy', 'two_bucket'),
            'reorder_point_source': self.get('BUSINESS_RULES', 'reorder_point_source', 'stored'),
            'forecast_days': self.get_int('BUSINESS_RULES', 'forecast_days', 30)
        }

    @property
    def monitor_config(self):
        """Get reorder monitor configuration."""
        return {
            'interval_minutes': self.get_int('MONITOR', 'interval_minutes', 60)
        }

# Global config instance
config = Config()
