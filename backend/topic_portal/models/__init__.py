# This file makes the 'models' directory a Python package.

from .submission import TopicSubmission
