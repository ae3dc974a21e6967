"""Squads Multisig CLI - initialize the Squads v4 program config and create multisig accounts."""

__version__ = "1.0.0"

from .pda import (
    find_program_address,
    program_config_address,
    multisig_address,
)
from .members import (
    parse_members,
    format_member,
)
from .instructions import (
    priority_fee_instruction,
    program_config_init_instruction,
    multisig_create_instruction,
)
from .transaction import (
    build_transaction,
    submit,
)
from .commands import (
    program_config_init,
    multisig_create,
    resolve_create_key,
)
from .types import (
    Member,
    ProgramConfig,
    Supplied,
    Generated,
    CommandResult,
)

__all__ = [
    "find_program_address",
    "program_config_address",
    "multisig_address",
    "parse_members",
    "format_member",
    "priority_fee_instruction",
    "program_config_init_instruction",
    "multisig_create_instruction",
    "build_transaction",
    "submit",
    "program_config_init",
    "multisig_create",
    "resolve_create_key",
    "Member",
    "ProgramConfig",
    "Supplied",
    "Generated",
    "CommandResult",
]
