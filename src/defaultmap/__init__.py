from defaultmap.btreemap import DefaultBTreeMap as DefaultBTreeMap
from defaultmap.btreemap import defaultbtreemap as defaultbtreemap
from defaultmap.config import Config as Config
from defaultmap.config import get_config as get_config
from defaultmap.default_fn import ConstantDefault as ConstantDefault
from defaultmap.default_fn import DefaultFn as DefaultFn
from defaultmap.default_fn import FnDefault as FnDefault
from defaultmap.default_fn import TypeDefault as TypeDefault
from defaultmap.hashmap import DefaultHashMap as DefaultHashMap
from defaultmap.hashmap import defaulthashmap as defaulthashmap
from defaultmap.serialize import dump as dump
from defaultmap.serialize import dump_json as dump_json
from defaultmap.serialize import load as load
from defaultmap.serialize import load_json as load_json
