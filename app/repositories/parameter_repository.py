"""
Parameter repository.

Parameters are keyed by ``asbis_key`` (the vendor attribute name); their
options are matched by value.
"""
from typing import Optional

from app.models.catalog import Parameter, ParameterOption
from app.repositories.base_catalog_repository import BaseCatalogRepository


class ParameterRepository(BaseCatalogRepository[Parameter]):
    """Repository for parameter and parameter option operations."""

    model_class = Parameter
    vendor_key = "asbis_key"

    def get_option(self, parameter: Parameter, value: str) -> Optional[ParameterOption]:
        """
        Get an option of a parameter by its value.

        Args:
            parameter: Owning parameter
            value: Vendor attribute value

        Returns:
            ParameterOption or None if not found
        """
        return self.db.query(ParameterOption).filter(
            ParameterOption.parameter_id == parameter.id,
            ParameterOption.name_bg == value
        ).first()

    def add_option(self, parameter: Parameter, value: str) -> ParameterOption:
        """
        Append a new option at the end of the parameter's option list.

        Args:
            parameter: Owning parameter
            value: Vendor attribute value

        Returns:
            Created ParameterOption
        """
        position = self.db.query(ParameterOption).filter(
            ParameterOption.parameter_id == parameter.id
        ).count()
        option = ParameterOption(
            parameter_id=parameter.id,
            name_bg=value,
            name_en=value,
            order=position,
        )
        self.db.add(option)
        self.db.flush()
        return option
