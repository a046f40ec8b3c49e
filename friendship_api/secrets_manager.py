import json
import os
import logging
from typing import Dict, Any, Optional

import boto3
from cachetools import TTLCache

logger = logging.getLogger(__name__)

# Rotated RDS credentials are picked up after this many seconds
SECRETS_CACHE_TTL = 300


class SecretsManager:
    """
    Read credentials from AWS Secrets Manager.

    Values are cached for SECRETS_CACHE_TTL seconds so that rotated
    credentials are eventually picked up. When a refresh fails the last
    known value is served instead.
    """

    def __init__(self, region_name: Optional[str] = None):
        self.region_name = region_name or os.environ.get('AWS_REGION', 'us-east-1')
        self._client = None
        self._cache = TTLCache(maxsize=32, ttl=SECRETS_CACHE_TTL)
        self._last_known: Dict[str, Any] = {}

    @property
    def client(self):
        """Lazy-loaded Secrets Manager client"""
        if self._client is None:
            session = boto3.session.Session()
            self._client = session.client(
                service_name='secretsmanager',
                region_name=self.region_name
            )
        return self._client

    def get_secret(self, secret_id: str) -> str:
        """
        Get a secret value, served from the cache while it is fresh.

        Args:
            secret_id: The secret ID or ARN

        Returns:
            The secret value as a string
        """
        if secret_id in self._cache:
            logger.debug(f"Returning cached secret for {secret_id}")
            return self._cache[secret_id]

        logger.info(f"Fetching fresh secret for {secret_id}")
        try:
            response = self.client.get_secret_value(SecretId=secret_id)
        except Exception as e:
            if secret_id in self._last_known:
                logger.warning(f"Fresh secret fetch failed for {secret_id}, using stale value: {e}")
                return self._last_known[secret_id]
            logger.error(f"Failed to get secret {secret_id}: {e}")
            raise

        value = response['SecretBinary'] if 'SecretBinary' in response else response['SecretString']
        self._cache[secret_id] = value
        self._last_known[secret_id] = value
        return value

    def get_json_secret(self, secret_id: str) -> Dict[str, Any]:
        return json.loads(self.get_secret(secret_id))

    def get_db_credentials(self) -> Dict[str, str]:
        """
        Get PostgreSQL credentials. RDS managed secrets hold at least
        ``username`` and ``password``.
        """
        return self.get_json_secret(os.environ.get('DATABASE_SECRETS_NAME', 'friendship-api/db'))
