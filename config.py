from dataclasses import dataclass
import logging
import os

logger = logging.getLogger(__name__)

@dataclass
class AwsConfig:
    access_key_id: str
    secret_access_key: str
    region: str

@dataclass
class StorageConfig:
    bucket: str
    video_prefix: str
    thumbnail_prefix: str
    metadata_prefix: str
    # Validity window of every signed URL, in seconds
    signed_url_expiry: int
    # Storage quota shared by all uploads, in bytes
    quota_bytes: int

@dataclass
class ReviewsConfig:
    # 'dynamodb', 'rds' or 'memory'
    backend: str
    table: str
    content_index: str

@dataclass
class PostgresConfig:
    host: str
    port: int
    database: str
    username: str
    password: str

    @property
    def url(self) -> str:
        return f'postgresql://{self.username}:{self.password}@{self.host}:{self.port}/{self.database}'

@dataclass
class AppConfig:
    # 'aws' or 'memory'; memory keeps blobs and reviews in-process (local runs, tests)
    storage_backend: str
    frontend_url: str

@dataclass
class Config:
    aws: AwsConfig
    storage: StorageConfig
    reviews: ReviewsConfig
    postgres: PostgresConfig
    app: AppConfig

# Used for any key missing from the ini file
DEFAULTS = {
    'AWS': {
        'ACCESS_KEY_ID': '',
        'SECRET_ACCESS_KEY': '',
        'REGION': 'ap-southeast-2',
    },
    'STORAGE': {
        'BUCKET': 'video-catalog-content',
        'VIDEO_PREFIX': 'videos',
        'THUMBNAIL_PREFIX': 'thumbnails',
        'METADATA_PREFIX': 'metadata',
        'SIGNED_URL_EXPIRY': '3600',
        'QUOTA_BYTES': str(5 * 1024 * 1024 * 1024),
    },
    'REVIEWS': {
        'BACKEND': 'dynamodb',
        'TABLE': 'Reviews',
        'CONTENT_INDEX': 'content_id-index',
    },
    'POSTGRES': {
        'HOST': 'localhost',
        'PORT': '5432',
        'DATABASE': 'catalog',
        'USERNAME': 'catalog',
        'PASSWORD': '',
    },
    'APP': {
        'STORAGE_BACKEND': 'aws',
        'FRONTEND_URL': 'http://localhost:3000',
    },
}

def _setting(_config, section: str, key: str) -> str:
    """Read a setting, preferring the CATALOG_<SECTION>_<KEY> environment variable."""
    env_value = os.getenv(f'CATALOG_{section}_{key}')
    if env_value is not None:
        return env_value
    return _config.get(section, key, fallback=DEFAULTS[section][key])

def _load_from_file(target = 'config.ini') -> Config:
    import configparser
    _config = configparser.ConfigParser()
    read = _config.read(target)
    if not read:
        logger.warning(f"Configuration file {target} not found, using defaults")

    return Config(
        aws=AwsConfig(
            access_key_id=_setting(_config, 'AWS', 'ACCESS_KEY_ID'),
            secret_access_key=_setting(_config, 'AWS', 'SECRET_ACCESS_KEY'),
            region=_setting(_config, 'AWS', 'REGION')
        ),
        storage=StorageConfig(
            bucket=_setting(_config, 'STORAGE', 'BUCKET'),
            video_prefix=_setting(_config, 'STORAGE', 'VIDEO_PREFIX'),
            thumbnail_prefix=_setting(_config, 'STORAGE', 'THUMBNAIL_PREFIX'),
            metadata_prefix=_setting(_config, 'STORAGE', 'METADATA_PREFIX'),
            signed_url_expiry=int(_setting(_config, 'STORAGE', 'SIGNED_URL_EXPIRY')),
            quota_bytes=int(_setting(_config, 'STORAGE', 'QUOTA_BYTES'))
        ),
        reviews=ReviewsConfig(
            backend=_setting(_config, 'REVIEWS', 'BACKEND'),
            table=_setting(_config, 'REVIEWS', 'TABLE'),
            content_index=_setting(_config, 'REVIEWS', 'CONTENT_INDEX')
        ),
        postgres=PostgresConfig(
            host=_setting(_config, 'POSTGRES', 'HOST'),
            port=int(_setting(_config, 'POSTGRES', 'PORT')),
            database=_setting(_config, 'POSTGRES', 'DATABASE'),
            username=_setting(_config, 'POSTGRES', 'USERNAME'),
            password=_setting(_config, 'POSTGRES', 'PASSWORD')
        ),
        app=AppConfig(
            storage_backend=_setting(_config, 'APP', 'STORAGE_BACKEND'),
            frontend_url=_setting(_config, 'APP', 'FRONTEND_URL')
        )
    )

logger.info(f"Loading configuration for environment: {os.getenv('ENV', 'unknown')}")

if os.getenv('ENV') == 'documentation' or not os.path.exists('config.ini'):
    config = _load_from_file('sample_config.ini')
else:
    config = _load_from_file('config.ini')
