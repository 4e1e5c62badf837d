from decimal import Decimal, InvalidOperation

import click

from deployment.exceptions import DeploymentConfigError
from deployment.params import gwei_to_wei


class GweiAmount(click.ParamType):
    name = "gwei"

    def convert(self, value, param, ctx):
        if isinstance(value, Decimal):
            return value
        try:
            amount = Decimal(str(value))
        except InvalidOperation:
            self.fail(f"{value} is not a valid decimal amount", param, ctx)
        if not amount.is_finite() or amount < 0:
            self.fail(f"{value} is not a valid gas price", param, ctx)
        try:
            gwei_to_wei(amount)
        except DeploymentConfigError as e:
            self.fail(str(e), param, ctx)
        return amount
