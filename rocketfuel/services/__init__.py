# Services package.
#
# Each module holds one service class that implements the public
# operations for a single aggregate:
#
#   question_service  - create, look up, search and vote on questions
#   answer_service    - answer, update, vote and accept answers
#   tag_service       - tag search and popular tags
#   user_directory    - read-only user lookups for notifications
#
# Services receive their DAOs and collaborators through the constructor
# (see rocketfuel.container) and translate data-layer failures into the
# error tokens declared in rocketfuel.errors.
