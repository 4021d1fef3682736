# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2023-2024 The Contestmark Project Developers

import logging

import peewee as pw
import pymysql

from contestmark.db.tables import User, Module, SecretCode, Copy, Result, Post
from contestmark.db.tables import database_proxy


log = logging.getLogger("DB")


class ContestDB:
    """The main Contestmark database."""

    MySQL = None

    def __init__(
        self,
        dbfile_name="contest.db",
        *,
        db_name=None,
        db_host=None,
        db_port=None,
        db_username=None,
        db_password=None,
    ):
        db = None
        if self.should_connect_to_mysql(db_name):
            log.info(f"Connecting to MySQL database: {db_name}...")
            db = self.connect_mysql(db_name, db_host, db_port, db_username, db_password)
            log.info(f"Connected to MySQL database: {db_name}")
        else:
            log.info("Connecting to SQLite...")
            db = self.connect_sqlite(dbfile_name)
            log.info("Connected to SQLite.")

        self._db = db
        database_proxy.initialize(self._db)

        with self._db:
            self._db.create_tables([User, Module, SecretCode, Copy, Result, Post])
        log.info("Database initialised.")

    def should_connect_to_mysql(self, db_name):
        return True if db_name else False

    def connect_mysql(self, db_name, db_host, db_port, db_username, db_password):
        mysql_connection = pymysql.connect(
            host=db_host,
            port=db_port,
            user=db_username,
            password=db_password,
        )

        mysql_connection.cursor().execute(f"CREATE DATABASE IF NOT EXISTS {db_name};")
        mysql_connection.close()

        self.MySQL = mysql_connection

        return pw.MySQLDatabase(
            db_name,
            host=db_host,
            port=db_port,
            user=db_username,
            password=db_password,
        )

    def connect_sqlite(self, dbfile_name):
        # foreign keys are off by default in SQLite
        db = pw.SqliteDatabase(None, pragmas={"foreign_keys": 1})
        # can't handle pathlib?
        db.init(str(dbfile_name))

        return db

    from contestmark.db.db_user import (
        createUser,
        doesUserExist,
        getUserRole,
        setUserPasswordHash,
        getUserPasswordHash,
        isUserEnabled,
        enableUser,
        disableUser,
        setUserToken,
        clearUserToken,
        getUserToken,
        userHasToken,
        getUserList,
        getTeachers,
        get_user_ref,
        updateUser,
        deleteUser,
    )
    from contestmark.db.db_code import (
        get_issued_codes,
        assign_secret_code,
        get_secret_codes,
        get_candidates_without_code,
    )
    from contestmark.db.db_assign import (
        create_module,
        create_copy,
        get_copy,
        get_copies_in_state,
        get_unassigned_copies,
        get_copies_requiring_arbitration,
        get_resolved_copies,
        assign_primary_graders,
        assign_arbitrator,
    )
    from contestmark.db.db_mark import (
        submit_mark,
        submit_marks,
        get_assigned_copies,
    )
    from contestmark.db.db_publish import (
        publish_results,
        publish_candidate,
        get_results,
    )
    from contestmark.db.db_post import (
        create_post,
        get_posts,
        delete_post,
    )
