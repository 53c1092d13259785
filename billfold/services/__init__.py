"""Operations that combine validation, the store and the domain rules.

Every operation validates before touching the database and raises a
``billfold.errors`` exception instead of writing bad data.
"""
