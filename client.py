"""
ERP Client

This module provides the main client interface for ERP operations,
wiring configuration, the HTTP document gateway and the bulk manager
together.
"""

from typing import Optional, Union
import logging
from pathlib import Path

import httpx

from config import ErpSettings, load_settings
from erp_ops_exceptions import ConfigurationError
from document_gateway import HttpDocumentGateway
from bulk_operations import BulkManager, BulkOperationConfig

# Logger setup
logger = logging.getLogger(__name__)


class ErpClient:
    """
    Main client interface for ERP operations.

    Example:
        ```python
        async with ErpClient("config.yaml") as client:
            report = await client.bulk.run_batch(operations)
        ```
    """

    def __init__(
        self,
        config: Optional[Union[ErpSettings, str, Path]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        """
        Initialize the ERP client.

        Args:
            config: Either an ErpSettings object or a path to a config YAML file.
                   If None, settings are read from the environment.
            transport: Optional httpx transport passed to the gateway.

        Raises:
            ConfigurationError: If the configuration type is invalid or the
                                credentials are missing.
        """
        if config is None:
            self.config = load_settings()
        elif isinstance(config, (str, Path)):
            self.config = load_settings(str(config))
        elif isinstance(config, ErpSettings):
            self.config = config
        else:
            raise ConfigurationError("Invalid configuration type. Expected ErpSettings, str, Path, or None.")

        self.gateway = HttpDocumentGateway(self.config.connection, transport=transport)
        self.bulk = BulkManager(self.gateway, BulkOperationConfig.from_settings(self.config.bulk))

        logger.info("ErpClient initialized successfully")

    async def __aenter__(self) -> "ErpClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the client and release all resources"""
        await self.gateway.aclose()
        logger.info("ErpClient connection closed")
