from iplens.validator.address import classify, is_valid, require_valid

__all__ = ["classify", "is_valid", "require_valid"]
