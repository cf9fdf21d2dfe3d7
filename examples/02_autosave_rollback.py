"""
Example 02: Autosave and Rollback

This example shows that a parent and its autosave children are written in
one transaction: an exception from any child undoes the whole save.
"""

import logging

from nested_params import ConnectionConfig, Engine, Record, RecordNotSaved, Repository, schema


class Avatar(Record):
    """Avatar entity; refuses to save when marked broken"""
    broken = False

    def after_save(self):
        if self.broken:
            raise RuntimeError("Oh noes!")


class Member(Record):
    """Member entity"""


schema(Avatar).fields("name", "member_id").build()
schema(Member).fields("email").has_one("avatar", Avatar, autosave=True).build()


def main():
    logging.basicConfig(level=logging.DEBUG, format="   %(name)s: %(message)s")
    config = ConnectionConfig(driver="sqlite", database=":memory:", echo=True)
    engine = Engine.from_config(config)
    engine.execute("CREATE TABLE members (id INTEGER PRIMARY KEY AUTOINCREMENT, email TEXT)")
    engine.execute(
        "CREATE TABLE avatars (id INTEGER PRIMARY KEY AUTOINCREMENT, name TEXT, member_id INTEGER)"
    )
    repo = Repository(engine)

    print("=== Autosave and Rollback ===\n")

    print("1. Save a member with a broken avatar:")
    member = repo.build(Member, {"email": "alice@example.com"})
    member.avatar = Avatar(name="alice.png")
    member.avatar.broken = True
    try:
        repo.save_strict(member)
    except RecordNotSaved as e:
        print(f"   {e}")
    print(f"   state: {repo.last_save_state.value}")
    print(f"   member id after rollback: {member.id}")
    print(f"   members stored: {repo.count(Member)}\n")

    print("2. Fix the avatar and save again:")
    member.avatar.broken = False
    repo.save_strict(member)
    print(f"   state: {repo.last_save_state.value}")
    avatar = member.avatar
    print(f"   member #{member.id}, avatar #{avatar.id} -> member {avatar.member_id}\n")

    engine.close()


if __name__ == "__main__":
    main()
