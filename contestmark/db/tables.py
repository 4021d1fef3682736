# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2023-2024 The Contestmark Project Developers

import peewee as pw

from contestmark.copy_state import copy_state, final_mark


database_proxy = pw.Proxy()


class BaseModel(pw.Model):
    class Meta:
        database = database_proxy


class User(BaseModel):
    name = pw.CharField(unique=True, max_length=1000)
    # one of contest_rules.ROLES
    role = pw.CharField(null=False)
    email = pw.CharField(null=True)
    first_name = pw.CharField(default="")
    last_name = pw.CharField(default="")
    enabled = pw.BooleanField(default=True)
    password = pw.CharField(null=True)  # hash of password for comparison - fixed length
    token = pw.CharField(null=True)  # authentication token - fixed length
    last_activity = pw.DateTimeField(null=False)
    last_action = pw.CharField(null=False)  # System generated string, not long

    @property
    def full_name(self):
        return f"{self.first_name} {self.last_name}".strip() or self.name


class Module(BaseModel):
    name = pw.CharField(unique=True)


class SecretCode(BaseModel):
    content = pw.CharField(unique=True)  # short, fixed length
    candidate = pw.ForeignKeyField(User, backref="secret_codes", unique=True)
    time = pw.DateTimeField(null=False)


class Copy(BaseModel):
    candidate = pw.ForeignKeyField(User, backref="copies")
    module = pw.ForeignKeyField(Module, backref="copies")
    teacher1 = pw.ForeignKeyField(User, backref="first_copies", null=True)
    teacher2 = pw.ForeignKeyField(User, backref="second_copies", null=True)
    teacher3 = pw.ForeignKeyField(User, backref="arbitrated_copies", null=True)
    mark1 = pw.DoubleField(null=True)
    mark2 = pw.DoubleField(null=True)
    mark3 = pw.DoubleField(null=True)
    # who gave mark1 and mark2, when they were given by a grader
    marker1 = pw.ForeignKeyField(User, backref="first_marks", null=True)
    marker2 = pw.ForeignKeyField(User, backref="second_marks", null=True)
    # bumped on every mark written, so concurrent writers can notice each other
    revision = pw.IntegerField(null=False, default=0)

    class Meta:
        indexes = ((("candidate", "module"), True),)

    def state(self):
        return copy_state(
            self.mark1,
            self.mark2,
            self.mark3,
            teacher1=self.teacher1_id,
            teacher2=self.teacher2_id,
            teacher3=self.teacher3_id,
        )

    def final_mark(self):
        return final_mark(self.mark1, self.mark2, self.mark3)

    @property
    def secret_code(self):
        """The candidate's code, looked up rather than owned: can be None."""
        sref = SecretCode.get_or_none(SecretCode.candidate == self.candidate_id)
        if sref is None:
            return None
        return sref.content


class Result(BaseModel):
    candidate = pw.ForeignKeyField(User, backref="results", unique=True)
    value = pw.DoubleField(null=False)
    accepted = pw.BooleanField(null=False)
    time = pw.DateTimeField(null=False)


class Post(BaseModel):
    """An announcement from the dean, shown to everyone next to the results."""

    author = pw.ForeignKeyField(User, backref="posts")
    title = pw.CharField(max_length=200)
    content = pw.TextField()
    link = pw.CharField(null=True)
    posted_at = pw.DateTimeField(null=False)
