class OpType:
    # --- Manipulation ---
    SPLIT = "Split"
    SPLIT_BY_LENGTHS = "SplitByLengths"
    CONCAT = "Concat"

    @classmethod
    def all(cls):
        return [
            v
            for k, v in cls.__dict__.items()
            if not k.startswith("_") and isinstance(v, str)
        ]
