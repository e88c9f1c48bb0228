import octogate


def test_version_export() -> None:
    assert isinstance(octogate.__version__, str)


def test_core_exports() -> None:
    assert hasattr(octogate, "create_app")
    assert hasattr(octogate, "TokenExchangeClient")
    assert hasattr(octogate, "OctogateSettings")


def test_provider_exports() -> None:
    assert hasattr(octogate, "GitHubOAuthProvider")
    assert hasattr(octogate, "DemoProvider")


def test_client_exports() -> None:
    assert hasattr(octogate, "AuthFacade")
    assert hasattr(octogate, "BackendClient")
    assert hasattr(octogate, "StateManager")


def test_all_names_resolve() -> None:
    for name in octogate.__all__:
        assert hasattr(octogate, name), name
