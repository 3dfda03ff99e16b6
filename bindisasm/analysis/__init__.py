from .mnemonic_classifier import (
    MnemonicClassifier,
    IntelClassifier,
    ArmClassifier,
    classifier_for,
    is_branching,
)
from .operand_resolver import operand_address, resolve_operand_address, is_ip_relative, is_static_operand
from .control_flow import (
    is_push_then_return,
    is_likely_address_operand,
    is_followable,
    target_address,
)

__all__ = [
    "MnemonicClassifier",
    "IntelClassifier",
    "ArmClassifier",
    "classifier_for",
    "is_branching",
    "operand_address",
    "resolve_operand_address",
    "is_ip_relative",
    "is_static_operand",
    "is_push_then_return",
    "is_likely_address_operand",
    "is_followable",
    "target_address",
]
