from mongograte.reset_policy import ResetPolicy, reset_database, reset_collection


def test_precedence():
    assert ResetPolicy.resolve(drop_all=True, drop=True, truncate=True) == ResetPolicy.DROP_ALL
    assert ResetPolicy.resolve(drop=True, truncate=True) == ResetPolicy.DROP
    assert ResetPolicy.resolve(truncate=True) == ResetPolicy.TRUNCATE
    assert ResetPolicy.resolve() == ResetPolicy.NONE


def test_drop_all(dst):
    db = dst.database('shop')
    db.create('a', [{'_id': 1}])
    db.create('b', [{'_id': 1}])
    db.create('system.views')
    reset_database(db, ResetPolicy.DROP_ALL)
    assert db.list_collection_names() == ['system.views']
    assert db['a'].docs == []


def test_drop_all_empty_database(dst):
    db = dst.database('shop')
    reset_database(db, ResetPolicy.DROP_ALL)
    assert db.list_collection_names() == []


def test_reset_database_other_policies(dst):
    db = dst.database('shop')
    db.create('a', [{'_id': 1}])
    for policy in (ResetPolicy.NONE, ResetPolicy.TRUNCATE, ResetPolicy.DROP):
        reset_database(db, policy)
    assert db.list_collection_names() == ['a']
    assert len(db['a'].docs) == 1


def test_truncate_keeps_collection(dst):
    coll = dst.database('shop').create('a', [{'_id': 1}, {'_id': 2}])
    reset_collection(coll, ResetPolicy.TRUNCATE)
    assert coll.docs == []
    assert coll.exists


def test_drop_collection(dst):
    coll = dst.database('shop').create('a', [{'_id': 1}])
    reset_collection(coll, ResetPolicy.DROP)
    assert coll.docs == []
    assert not coll.exists


def test_drop_missing_collection(dst):
    coll = dst.database('shop')['missing']
    reset_collection(coll, ResetPolicy.DROP)
    assert not coll.exists


def test_no_reset(dst):
    coll = dst.database('shop').create('a', [{'_id': 1}])
    reset_collection(coll, ResetPolicy.NONE)
    reset_collection(coll, ResetPolicy.DROP_ALL)
    assert len(coll.docs) == 1
    assert coll.exists
