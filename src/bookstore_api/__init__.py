"""
Bookstore API test suite task collection.
"""

from invoke import Collection

__version__ = '0.1.0'

# Create namespace and collect tasks from each submodule
namespace = Collection()

from .build.tasks import test

for task_name, task in Collection.from_module(test).tasks.items():
    namespace.add_task(task)
