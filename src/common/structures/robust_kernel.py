import abc
from pydantic import BaseModel, Field
from typing import Annotated, Literal, Union


class SigmaAbstract(BaseModel, abc.ABC):
    """
    Scale parameter of the Welsch robust kernel.
    Intended use: estimator configuration, serialization through (h)JSON.
    """
    parsable_type: str


class SigmaUnset(SigmaAbstract):
    """
    Uniform weighting, i.e. ordinary least squares.
    """

    # noinspection PyTypeHints
    parsable_type: Literal["unset"] = Field(default="unset")


class SigmaValue(SigmaAbstract):

    # noinspection PyTypeHints
    parsable_type: Literal["value"] = Field(default="value")

    value: float = Field()


class SigmaAdaptive(SigmaAbstract):
    """
    Scale is derived from the residuals of each call, so that sigma is a third of the largest residual.
    """

    # noinspection PyTypeHints
    parsable_type: Literal["adaptive"] = Field(default="adaptive")


Sigma = Annotated[
    Union[
        SigmaUnset,
        SigmaValue,
        SigmaAdaptive],
    Field(discriminator="parsable_type")]
