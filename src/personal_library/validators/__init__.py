# personal_library/validators/
# │
# ├── config_validators.py     # normalizers used by Settings field validators
# ├── model_validators.py      # model introspection used by BaseRepository prechecks
# ├── rules.py                 # ValidationRule, predicates and the Validator interpreter
# └── dto_validators.py        # static rule tables for each request DTO
