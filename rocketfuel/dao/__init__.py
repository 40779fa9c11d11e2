# Data access package.
#
# One DAO per table group.  Every DAO method returns a pending
# ``DaoOperation`` (see operation.py) rather than running SQL directly:
#
#   question_dao  - questions, their tags, votes and the answered flag
#   answer_dao    - answers, acceptance and votes
#   tag_dao       - tag search and popularity
#   user_dao      - read-only user lookups
#
# DAOs hold a session factory, never a session; each standalone operation
# rents its own connection from the pool.
