from Client_module.party_logos import PartyLogoResolver, normalize_party_name


def resolver():
    return PartyLogoResolver(lambda path: f'http://api.test{path}' if path else None)


def test_normalize_party_name():
    assert normalize_party_name('B.J.P.') == 'bjp'
    assert normalize_party_name('  Aam   Aadmi Party ') == 'aam aadmi party'
    assert normalize_party_name(None) == ''


def test_bundled_logo_by_party_name():
    logos = resolver()

    assert logos.bundled_logo('BJP') == 'assets/party_logos/bjp.png'
    assert logos.bundled_logo('Indian National Congress') == 'assets/party_logos/inc.png'
    assert logos.bundled_logo('Independent') is None


def test_stored_logo_wins():
    member = {'partyName': 'AAP', 'partyLogoUrl': '/uploads/members/abc.png'}

    assert resolver().resolve(member) == 'http://api.test/uploads/members/abc.png'


def test_falls_back_to_bundled_logo():
    assert resolver().resolve({'partyName': 'aap', 'partyLogoUrl': ''}) == 'assets/party_logos/aap.png'
    assert resolver().resolve({'partyName': ''}) is None
