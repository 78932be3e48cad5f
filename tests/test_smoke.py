def test_import() -> None:
    import schemes
    from schemes import __version__
    assert isinstance(__version__, str)
    assert schemes.InformationScheme is not None


def test_public_api() -> None:
    from schemes import InformationComponent, InformationScheme
    scheme = InformationScheme()
    assert scheme.add(InformationComponent("The game"))
    assert scheme.roots_to_string() == "The game\n"
