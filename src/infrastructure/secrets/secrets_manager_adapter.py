"""
Infrastructure adapter: AWS Secrets Manager → ISecretStore.

load_into_env() runs once at startup, before Settings.from_env(), so API keys
stored in a JSON secret (ALPHA_VANTAGE_API_KEY, GEMINI_API_KEY, LANGFUSE_*)
are available process-wide.
"""

import json
import logging
import os

import boto3

from src.domain.ports.secret_store_port import ISecretStore

logger = logging.getLogger(__name__)


class SecretsManagerAdapter(ISecretStore):
    """Fetches and deserializes secrets from AWS Secrets Manager."""

    def __init__(self, region: str | None = None, client=None) -> None:
        self._client = client or boto3.client(
            "secretsmanager",
            region_name=region or os.environ.get("AWS_DEFAULT_REGION", "us-east-1"),
        )

    def fetch_api_keys(self, secret_id: str) -> dict[str, str]:
        """Decode a JSON SecretString; values are coerced to str."""
        response = self._client.get_secret_value(SecretId=secret_id)
        payload = json.loads(response["SecretString"])
        return {key: str(value) for key, value in payload.items()}

    def load_into_env(self, secret_arn: str) -> None:
        """Inject all key-value pairs of a JSON secret into os.environ.

        Values already present in the environment win, so local overrides
        keep working.
        """
        secrets = self.fetch_api_keys(secret_arn)
        for key, value in secrets.items():
            os.environ.setdefault(key, value)
        logger.info("Loaded %d secret values into the environment", len(secrets))
