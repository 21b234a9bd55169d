from .exceptions import ConfigurationError
from .structures import TransformationEstimationParameters
import hjson
import logging
import os
from pydantic import ValidationError


logger = logging.getLogger(__name__)


class IOUtils:
    """
    static class for IO-related utility functions.
    """

    def __init__(self):
        raise RuntimeError("This class is not meant to be initialized.")

    @staticmethod
    def hjson_read(
        filepath: str
    ) -> dict:
        """
        hjson is less strict than json and supports comments, and any json file is also valid hjson.
        :param filepath: Location of an existing file
        :return: Dictionary representing the top-level object of the file
        """
        if not os.path.exists(filepath):
            raise ConfigurationError(f"Specified filepath {filepath} does not exist.")
        if not os.path.isfile(filepath):
            raise ConfigurationError(f"Specified filepath location {filepath} exists but is not a file.")
        try:
            with open(filepath, 'r', encoding='utf-8') as input_file:
                contents = hjson.load(input_file)
        except OSError as e:
            raise ConfigurationError(f"An unexpected file I/O error happened while reading {filepath}: {str(e)}") from e
        except hjson.HjsonDecodeError as e:
            raise ConfigurationError(f"File {filepath} could not be parsed: {str(e)}") from e
        if not isinstance(contents, dict):
            raise ConfigurationError(f"File {filepath} does not contain an object at its top level.")
        return dict(contents)

    @staticmethod
    def read_estimation_parameters(
        filepath: str
    ) -> TransformationEstimationParameters:
        parameters_dict: dict = IOUtils.hjson_read(filepath=filepath)
        try:
            parameters = TransformationEstimationParameters(**parameters_dict)
        except ValidationError as e:
            raise ConfigurationError(f"Estimation parameters in {filepath} were ill-formed: {str(e)}") from None
        logger.info(f"Loaded estimation parameters from {filepath}.")
        return parameters
