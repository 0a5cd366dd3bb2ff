"""CategoryService - read-only access to the categories table."""

from loguru import logger

from ..errors import DataError, GatewayError
from ..gateway.base import Gateway
from ..models.entities import Category
from ..result import Result
from .common import data_error_from


class CategoryService:
    """Categories are managed in the store; the client only lists them."""

    def __init__(self, gateway: Gateway):
        self.gateway = gateway
        self.table = "categories"

    async def list_categories(self) -> Result[list[Category], DataError]:
        """All categories ordered by name."""
        try:
            response = await self.gateway.table(self.table).select("*").order("name").execute()
        except GatewayError as e:
            logger.warning(f"Loading categories failed: {e!r}")
            return Result.fail(data_error_from(e, "load categories"))
        return Result.ok([Category.model_validate(row) for row in response.data])
