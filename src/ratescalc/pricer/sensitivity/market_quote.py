"""
Market quote sensitivities.

Converts sensitivities to curve parameters into sensitivities to the market
quotes the curves were calibrated to, using the chain rule

    dPV/dq = dPV/dp . dp/dq

where dp/dq is the calibration Jacobian stored in the curve metadata. The
result of one curve's Jacobian may spread over every curve calibrated with
it; it is split by curve and summed per curve name.
"""

from typing import Dict

import numpy as np

from ...errors import CurveNotFoundError, MissingJacobianError
from ...market.curve.metadata import CurveInfoType, CurveMetadata, CurveName
from ...market.sensitivity import CurveCurrencyParameterSensitivities, CurveCurrencyParameterSensitivity
from ..rates_provider import RatesProvider


class MarketQuoteSensitivityCalculator:
    """Calculates market quote sensitivities from curve parameter sensitivities."""

    def sensitivity(
        self,
        param_sensitivities: CurveCurrencyParameterSensitivities,
        provider: RatesProvider,
    ) -> CurveCurrencyParameterSensitivities:
        """
        Market quote sensitivities, labelled with the metadata of the provider's curves.

        Args:
            param_sensitivities: Sensitivities to the curve parameters
            provider: Provider holding every curve named in the Jacobians

        Raises:
            MissingJacobianError: If a sensitivity's curve has no calibration Jacobian
            CurveNotFoundError: If a curve of a Jacobian is not in the provider
        """
        metadata_by_curve: Dict[CurveName, CurveMetadata] = {}
        for param_sens in param_sensitivities:
            jacobian = self._jacobian(param_sens)
            for size in jacobian.order:
                curve = provider.find_curve(size.name)
                if curve is None:
                    raise CurveNotFoundError(f"Market quote sensitivity requires curve: {size.name}")
                metadata_by_curve[size.name] = curve.metadata

        result = CurveCurrencyParameterSensitivities.empty()
        for param_sens in param_sensitivities:
            jacobian = self._jacobian(param_sens)
            quote_sens = np.dot(param_sens.sensitivity, jacobian.jacobian_matrix)
            for name, values in jacobian.split_values(quote_sens).items():
                result = result.combined_with(
                    CurveCurrencyParameterSensitivity(metadata_by_curve[name], param_sens.currency, values))
        return result

    @staticmethod
    def _jacobian(param_sens: CurveCurrencyParameterSensitivity):
        jacobian = param_sens.metadata.find_info(CurveInfoType.JACOBIAN)
        if jacobian is None:
            raise MissingJacobianError(
                f"Market quote sensitivity requires Jacobian calibration information for curve "
                f"'{param_sens.curve_name}'")
        return jacobian


__all__ = ["MarketQuoteSensitivityCalculator"]
