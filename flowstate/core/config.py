# flowstate/core/config.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from dataclasses import dataclass

DEFAULT_LOGGER_NAME = "flowstate.workflow"


@dataclass(frozen=True)
class WorkflowOptions:
    """
    Per-engine configuration.

    :param serialize: Run overlapping dispatch/reset calls one after another through
        a per-engine lock instead of letting their steps interleave.
    :param validate: Validate the definition when the engine is constructed rather
        than failing on the first dispatch that reaches a bad reference.
    :param logger_name: Name of the logger the engine writes debug records to.
    """

    serialize: bool = False
    validate: bool = False
    logger_name: str = DEFAULT_LOGGER_NAME
