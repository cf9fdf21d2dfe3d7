"""
Example 01: Nested Attributes

This example creates a project together with its tasks from one params dict,
then edits, adds and removes tasks through the same kind of dict.
"""

from nested_params import ConnectionConfig, Engine, Record, Repository, presence_of, schema
from nested_params.nested.form import NestedFieldNamer


class Task(Record):
    """Task entity"""
    validations = [presence_of("name")]


class Project(Record):
    """Project entity"""
    validations = [presence_of("name")]


schema(Task).fields("name", "project_id").build()
schema(Project).fields("name").has_many(
    "tasks", Task, nested_params=True, destroy_missing=True
).build()


def main():
    config = ConnectionConfig(driver="sqlite", database=":memory:")
    engine = Engine.from_config(config)
    engine.execute("CREATE TABLE projects (id INTEGER PRIMARY KEY AUTOINCREMENT, name TEXT)")
    engine.execute(
        "CREATE TABLE tasks (id INTEGER PRIMARY KEY AUTOINCREMENT, name TEXT, project_id INTEGER)"
    )
    repo = Repository(engine)

    print("=== Nested Attributes ===\n")

    # Create parent and children at once
    print("1. Create a project with two tasks:")
    project = repo.create(Project, {
        "name": "NestedParams",
        "tasks_attributes": {
            "new_1": {"name": "Buy food"},
            "new_2": {"name": "Cook"},
        },
    })
    for task in project.tasks:
        print(f"   - #{task.id} {task.name}")
    print()

    # Field names a form would render
    print("2. Form field names:")
    namer = NestedFieldNamer(project)
    for key, task in namer.children("tasks"):
        print(f"   {namer.field_name('tasks', 'name', task)} = {task.name!r}")
    print()

    # Update one, add one, drop the one left out
    print("3. Submit the form back:")
    project = repo.find(Project, project.id)
    buy_food = project.tasks[0]
    repo.update_attributes(project, {
        "tasks_attributes": {
            str(buy_food.id): {"name": "Buy food"},
            "new_1700000000": {"name": "Take out"},
        },
    })
    for task in repo.find(Project, project.id).tasks:
        print(f"   - #{task.id} {task.name}")
    print()

    # Child errors show up on the parent
    print("4. Invalid child:")
    broken = repo.create(Project, {"name": "Broken", "tasks_attributes": [{"name": ""}]})
    print(f"   saved: {not broken.new_record}")
    print(f"   errors: {broken.errors.full_messages()}\n")

    engine.close()


if __name__ == "__main__":
    main()
