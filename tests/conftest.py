pytest_plugins = ["cratenav.test_utils.fixtures"]
