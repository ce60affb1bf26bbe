from .crud_submission import submission
