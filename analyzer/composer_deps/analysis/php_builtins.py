"""Symbols provided by the PHP runtime and its extensions.

Every class, function and constant listed here is mapped to the extension
defining it, under the name Composer uses for the platform requirement
(``ext-json``, ``ext-mbstring``...). Symbols of the core extensions, which no
PHP build can leave out, are plain builtins the analyzer skips. Symbols of
any other extension are attributed to its ``ext-*`` requirement instead of a
vendor package.

Function and class names are compared case-insensitively, constants
case-sensitively, matching PHP's own rules.
"""

from typing import Dict, Mapping, Optional

from ..models.symbol import SymbolKind

# Always compiled in, so never worth declaring in composer.json
CORE_EXTENSIONS = frozenset(
    {
        "ext-core",
        "ext-date",
        "ext-json",
        "ext-hash",
        "ext-pcre",
        "ext-phar",
        "ext-reflection",
        "ext-spl",
        "ext-random",
        "ext-standard",
    }
)

PSEUDO_TYPES = frozenset(
    """
    bool int float string null array object never void false true callable
    iterable mixed self parent static resource numeric
    """.split()
)

COMPOSER_RUNTIME_CLASSES = frozenset(
    {"composer\\installedversions", "composer\\autoload\\classloader"}
)


def _table(sections: Mapping[str, str], lower: bool) -> Dict[str, str]:
    table: Dict[str, str] = {}
    for extension, names in sections.items():
        for name in names.split():
            table[name.lower() if lower else name] = extension
    return table


CLASS_EXTENSIONS = _table(
    {
        "ext-core": """
            stdClass Exception ErrorException Error CompileError ParseError
            TypeError ArgumentCountError ValueError ArithmeticError
            DivisionByZeroError UnhandledMatchError Closure Generator
            ClosedGeneratorException WeakReference WeakMap Attribute
            ReturnTypeWillChange AllowDynamicProperties SensitiveParameter
            SensitiveParameterValue Override Deprecated Fiber FiberError
            Stringable Traversable IteratorAggregate Iterator ArrayAccess
            Countable Serializable UnitEnum BackedEnum InternalIterator
        """,
        "ext-standard": """
            __PHP_Incomplete_Class php_user_filter Directory AssertionError
        """,
        "ext-json": "JsonSerializable JsonException",
        "ext-spl": """
            LogicException BadFunctionCallException BadMethodCallException
            DomainException InvalidArgumentException LengthException
            OutOfRangeException RuntimeException OutOfBoundsException
            OverflowException RangeException UnderflowException
            UnexpectedValueException

            ArrayObject ArrayIterator RecursiveArrayIterator AppendIterator
            CachingIterator CallbackFilterIterator DirectoryIterator
            EmptyIterator FilesystemIterator FilterIterator GlobIterator
            InfiniteIterator IteratorIterator LimitIterator MultipleIterator
            NoRewindIterator OuterIterator ParentIterator
            RecursiveCachingIterator RecursiveCallbackFilterIterator
            RecursiveDirectoryIterator RecursiveFilterIterator
            RecursiveIterator RecursiveIteratorIterator RecursiveRegexIterator
            RecursiveTreeIterator RegexIterator SeekableIterator
            SplDoublyLinkedList SplFixedArray SplHeap SplMinHeap SplMaxHeap
            SplObjectStorage SplObserver SplPriorityQueue SplQueue SplStack
            SplSubject SplTempFileObject SplFileInfo SplFileObject
        """,
        "ext-date": """
            DateTime DateTimeImmutable DateTimeInterface DateTimeZone
            DateInterval DatePeriod DateError DateObjectError DateRangeError
            DateException DateInvalidOperationException
            DateInvalidTimeZoneException DateMalformedIntervalStringException
            DateMalformedPeriodStringException DateMalformedStringException
        """,
        "ext-reflection": """
            Reflection Reflector ReflectionException ReflectionClass
            ReflectionClassConstant ReflectionEnum ReflectionEnumUnitCase
            ReflectionEnumBackedCase ReflectionExtension ReflectionFiber
            ReflectionFunction ReflectionFunctionAbstract ReflectionGenerator
            ReflectionMethod ReflectionNamedType ReflectionObject
            ReflectionParameter ReflectionProperty ReflectionReference
            ReflectionType ReflectionUnionType ReflectionIntersectionType
            ReflectionZendExtension ReflectionAttribute
        """,
        "ext-random": """
            Random\\Randomizer Random\\Engine Random\\CryptoSafeEngine
            Random\\Engine\\Mt19937 Random\\Engine\\PcgOneseq128XslRr64
            Random\\Engine\\Xoshiro256StarStar Random\\Engine\\Secure
            Random\\RandomError Random\\BrokenRandomEngineError
            Random\\RandomException Random\\IntervalBoundary
        """,
        "ext-hash": "HashContext",
        "ext-phar": "Phar PharData PharFileInfo PharException",
        "ext-simplexml": "SimpleXMLElement SimpleXMLIterator",
        "ext-dom": """
            DOMDocument DOMElement DOMNode DOMNodeList DOMXPath DOMAttr DOMText
            DOMComment DOMException DOMImplementation DOMDocumentFragment
            DOMCharacterData DOMCdataSection DOMNamedNodeMap
            DOMProcessingInstruction DOMEntityReference DOMEntity DOMNotation
            DOMDocumentType DOMNameSpaceNode DOMChildNode DOMParentNode
        """,
        "ext-xmlreader": "XMLReader",
        "ext-xmlwriter": "XMLWriter",
        "ext-xml": "XMLParser",
        "ext-libxml": "LibXMLError",
        "ext-pdo": "PDO PDOStatement PDOException PDORow",
        "ext-sqlite3": "SQLite3 SQLite3Stmt SQLite3Result",
        "ext-mysqli": """
            mysqli mysqli_result mysqli_stmt mysqli_sql_exception
            mysqli_driver mysqli_warning
        """,
        "ext-curl": """
            CurlHandle CurlMultiHandle CurlShareHandle CURLFile CURLStringFile
        """,
        "ext-openssl": """
            OpenSSLCertificate OpenSSLCertificateSigningRequest
            OpenSSLAsymmetricKey
        """,
        "ext-sodium": "SodiumException",
        "ext-zip": "ZipArchive",
        "ext-zlib": "InflateContext DeflateContext",
        "ext-gd": "GdImage GdFont",
        "ext-fileinfo": "finfo",
        "ext-sockets": "Socket AddressInfo",
        "ext-intl": """
            IntlChar Collator NumberFormatter Normalizer Locale
            MessageFormatter IntlDateFormatter IntlTimeZone IntlCalendar
            IntlGregorianCalendar IntlBreakIterator IntlException
            Transliterator Spoofchecker ResourceBundle UConverter IntlIterator
        """,
        "ext-redis": """
            Redis RedisArray RedisCluster RedisClusterException RedisException
            RedisSentinel
        """,
        "ext-memcached": "Memcached MemcachedException",
    },
    lower=True,
)

FUNCTION_EXTENSIONS = _table(
    {
        "ext-core": """
            class_exists enum_exists get_called_class get_class
            get_class_methods get_class_vars get_declared_classes
            get_declared_interfaces get_declared_traits
            get_mangled_object_vars get_object_vars get_parent_class
            interface_exists is_a is_subclass_of method_exists
            property_exists trait_exists func_get_arg func_get_args
            func_num_args function_exists get_defined_functions define
            defined get_defined_constants debug_backtrace
            debug_print_backtrace error_reporting restore_error_handler
            restore_exception_handler set_error_handler
            set_exception_handler trigger_error user_error gc_collect_cycles
            gc_disable gc_enable gc_enabled gc_mem_caches gc_status
            zend_version extension_loaded get_extension_funcs
            get_loaded_extensions get_resource_id get_resource_type strlen
            strcmp strncmp strcasecmp strncasecmp
        """,
        "ext-standard": """
            array_change_key_case array_chunk array_column array_combine
            array_count_values array_diff array_diff_assoc array_diff_key
            array_diff_uassoc array_diff_ukey array_fill array_fill_keys
            array_filter array_flip array_intersect array_intersect_assoc
            array_intersect_key array_intersect_uassoc array_intersect_ukey
            array_is_list array_key_exists array_key_first array_key_last
            array_keys array_map array_merge array_merge_recursive
            array_multisort array_pad array_pop array_product array_push
            array_rand array_reduce array_replace array_replace_recursive
            array_reverse array_search array_shift array_slice array_splice
            array_sum array_udiff array_udiff_assoc array_udiff_uassoc
            array_uintersect array_uintersect_assoc array_uintersect_uassoc
            array_unique array_unshift array_values array_walk
            array_walk_recursive array_find array_any array_all arsort asort
            compact count current each end extract in_array key key_exists
            krsort ksort natcasesort natsort next pos prev range reset rsort
            shuffle sizeof sort uasort uksort usort

            addcslashes addslashes bin2hex chop chr chunk_split
            convert_uudecode convert_uuencode count_chars crc32 crypt explode
            fprintf get_html_translation_table hebrev hex2bin
            html_entity_decode htmlentities htmlspecialchars
            htmlspecialchars_decode implode join lcfirst levenshtein
            localeconv ltrim md5 md5_file metaphone money_format nl_langinfo
            nl2br number_format ord parse_str print printf
            quoted_printable_decode quoted_printable_encode quotemeta rtrim
            setlocale sha1 sha1_file similar_text soundex sprintf sscanf
            str_contains str_ends_with str_getcsv str_ireplace str_pad
            str_repeat str_replace str_rot13 str_shuffle str_split
            str_starts_with str_word_count strchr strcoll strcspn strip_tags
            stripcslashes stripos stripslashes stristr strnatcasecmp
            strnatcmp strpbrk strpos strrchr strrev strripos strrpos strspn
            strstr strtok strtolower strtoupper strtr substr substr_compare
            substr_count substr_replace trim ucfirst ucwords utf8_decode
            utf8_encode vfprintf vprintf vsprintf wordwrap base64_decode
            base64_encode urlencode urldecode rawurlencode rawurldecode
            http_build_query parse_url get_headers uniqid lcg_value

            abs acos acosh asin asinh atan atan2 atanh base_convert bindec
            ceil cos cosh decbin dechex decoct deg2rad exp expm1 fdiv floor
            fmod hexdec hypot intdiv is_finite is_infinite is_nan log log10
            log1p log2 max min octdec pi pow rad2deg round sin sinh sqrt tan
            tanh fpow

            boolval debug_zval_refcount doubleval empty floatval
            get_debug_type get_defined_vars gettype intval is_array is_bool
            is_callable is_countable is_double is_float is_int is_integer
            is_iterable is_long is_null is_numeric is_object is_resource
            is_scalar is_string isset print_r serialize settype strval
            unserialize unset var_dump var_export

            call_user_func call_user_func_array register_shutdown_function
            register_tick_function unregister_tick_function
            forward_static_call forward_static_call_array constant
            error_get_last error_clear_last error_log assert assert_options

            basename chgrp chmod chown clearstatcache copy dirname
            disk_free_space disk_total_space fclose feof fflush fgetc fgetcsv
            fgets file file_exists file_get_contents file_put_contents
            fileatime filectime filegroup fileinode filemtime fileowner
            fileperms filesize filetype flock fnmatch fopen fpassthru fputcsv
            fputs fread fscanf fseek fstat fsync fdatasync ftell ftruncate
            fwrite glob is_dir is_executable is_file is_link is_readable
            is_uploaded_file is_writable is_writeable lchgrp lchown link
            linkinfo lstat mkdir move_uploaded_file parse_ini_file
            parse_ini_string pathinfo pclose popen readfile readlink realpath
            rename rewind rmdir stat symlink tempnam tmpfile touch umask
            unlink opendir readdir closedir rewinddir scandir dir chdir getcwd
            stream_context_create stream_get_contents stream_get_meta_data
            stream_set_blocking stream_set_timeout stream_select
            stream_socket_client stream_socket_server stream_wrapper_register
            stream_filter_append stream_isatty stream_copy_to_stream
            stream_get_wrappers stream_resolve_include_path

            gettimeofday hrtime microtime usleep sleep time_nanosleep
            time_sleep_until password_hash password_verify
            password_needs_rehash password_get_info

            ob_clean ob_end_clean ob_end_flush ob_flush ob_get_clean
            ob_get_contents ob_get_flush ob_get_length ob_get_level
            ob_get_status ob_implicit_flush ob_start flush header
            header_remove headers_list headers_sent http_response_code
            setcookie setrawcookie

            get_cfg_var get_current_user get_include_path getenv getmypid
            gethostname ini_get ini_get_all ini_restore ini_set
            memory_get_peak_usage memory_get_usage memory_reset_peak_usage
            php_ini_loaded_file php_sapi_name php_uname phpinfo phpversion
            putenv set_include_path set_time_limit sys_get_temp_dir
            version_compare ignore_user_abort connection_aborted
            connection_status escapeshellarg escapeshellcmd exec passthru
            proc_close proc_get_status proc_open shell_exec system
            gethostbyname getopt highlight_string php_strip_whitespace
        """,
        "ext-random": """
            mt_getrandmax mt_rand mt_srand rand random_bytes random_int srand
            getrandmax
        """,
        "ext-spl": """
            iterator_apply iterator_count iterator_to_array spl_autoload
            spl_autoload_call spl_autoload_extensions spl_autoload_functions
            spl_autoload_register spl_autoload_unregister spl_classes
            spl_object_hash spl_object_id class_implements class_parents
            class_uses
        """,
        "ext-pcre": """
            preg_grep preg_last_error preg_last_error_msg preg_match
            preg_match_all preg_quote preg_replace preg_replace_callback
            preg_replace_callback_array preg_split
        """,
        "ext-date": """
            checkdate date date_add date_create date_create_immutable
            date_default_timezone_get date_default_timezone_set date_diff
            date_format date_parse date_parse_from_format date_sub
            date_sun_info date_timestamp_get getdate gmdate gmmktime
            gmstrftime idate localtime mktime strftime strptime strtotime
            time timezone_identifiers_list timezone_open
        """,
        "ext-json": """
            json_decode json_encode json_last_error json_last_error_msg
            json_validate
        """,
        "ext-hash": """
            hash hash_algos hash_equals hash_file hash_final hash_hkdf
            hash_hmac hash_hmac_algos hash_init hash_pbkdf2 hash_update
        """,
        "ext-mbstring": """
            mb_check_encoding mb_convert_case mb_convert_encoding
            mb_internal_encoding mb_str_pad mb_str_split mb_strlen mb_strpos
            mb_strrpos mb_stripos mb_strripos mb_strstr mb_strtolower
            mb_strtoupper mb_strwidth mb_substr mb_substr_count
            mb_detect_encoding mb_strimwidth mb_trim mb_ltrim mb_rtrim
            mb_ucfirst mb_lcfirst mb_ord mb_chr mb_scrub
        """,
        "ext-ctype": """
            ctype_alnum ctype_alpha ctype_cntrl ctype_digit ctype_graph
            ctype_lower ctype_print ctype_punct ctype_space ctype_upper
            ctype_xdigit
        """,
        "ext-filter": """
            filter_var filter_input filter_has_var filter_list filter_id
            filter_var_array filter_input_array
        """,
        "ext-curl": """
            curl_init curl_setopt curl_setopt_array curl_exec curl_close
            curl_error curl_errno curl_getinfo curl_multi_init
            curl_multi_exec curl_multi_add_handle curl_multi_remove_handle
            curl_multi_close
        """,
        "ext-openssl": """
            openssl_encrypt openssl_decrypt openssl_random_pseudo_bytes
            openssl_cipher_iv_length openssl_sign openssl_verify
        """,
        "ext-sodium": """
            sodium_crypto_secretbox sodium_crypto_secretbox_open
            sodium_bin2hex sodium_hex2bin sodium_memzero
        """,
        "ext-zlib": "gzcompress gzuncompress gzencode gzdecode gzdeflate gzinflate",
        "ext-iconv": "iconv iconv_strlen iconv_substr iconv_strpos",
        "ext-simplexml": "simplexml_load_file simplexml_load_string",
        "ext-libxml": "libxml_use_internal_errors libxml_get_errors libxml_clear_errors",
    },
    lower=True,
)

CONSTANT_EXTENSIONS = _table(
    {
        "ext-core": """
            PHP_VERSION PHP_MAJOR_VERSION PHP_MINOR_VERSION
            PHP_RELEASE_VERSION PHP_VERSION_ID PHP_EXTRA_VERSION PHP_OS
            PHP_OS_FAMILY PHP_EOL PHP_INT_MAX PHP_INT_MIN PHP_INT_SIZE
            PHP_FLOAT_EPSILON PHP_FLOAT_MAX PHP_FLOAT_MIN PHP_FLOAT_DIG
            PHP_MAXPATHLEN PHP_SAPI PHP_BINARY PHP_DEBUG PHP_ZTS PHP_PREFIX
            PHP_BINDIR PHP_LIBDIR PHP_DATADIR PHP_SHLIB_SUFFIX PHP_FD_SETSIZE
            DEFAULT_INCLUDE_PATH PEAR_INSTALL_DIR PEAR_EXTENSION_DIR
            PHP_EXTENSION_DIR DIRECTORY_SEPARATOR PATH_SEPARATOR
            E_ERROR E_WARNING E_PARSE E_NOTICE E_CORE_ERROR E_CORE_WARNING
            E_COMPILE_ERROR E_COMPILE_WARNING E_USER_ERROR E_USER_WARNING
            E_USER_NOTICE E_STRICT E_RECOVERABLE_ERROR E_DEPRECATED
            E_USER_DEPRECATED E_ALL STDIN STDOUT STDERR
            __LINE__ __FILE__ __DIR__ __FUNCTION__ __CLASS__ __TRAIT__
            __METHOD__ __NAMESPACE__ __COMPILER_HALT_OFFSET__
        """,
        "ext-standard": """
            NAN INF M_PI M_E M_LOG2E M_LOG10E M_LN2 M_LN10 M_PI_2 M_PI_4
            M_1_PI M_2_PI M_SQRT2 M_SQRT1_2 PHP_ROUND_HALF_UP
            PHP_ROUND_HALF_DOWN PHP_ROUND_HALF_EVEN PHP_ROUND_HALF_ODD
            SORT_ASC SORT_DESC SORT_REGULAR SORT_NUMERIC SORT_STRING
            SORT_LOCALE_STRING SORT_NATURAL SORT_FLAG_CASE COUNT_NORMAL
            COUNT_RECURSIVE ARRAY_FILTER_USE_KEY ARRAY_FILTER_USE_BOTH
            CASE_LOWER CASE_UPPER EXTR_OVERWRITE EXTR_SKIP
            ENT_QUOTES ENT_COMPAT ENT_NOQUOTES ENT_HTML401 ENT_HTML5 ENT_XML1
            ENT_XHTML ENT_IGNORE ENT_SUBSTITUTE ENT_DISALLOWED
            STR_PAD_LEFT STR_PAD_RIGHT STR_PAD_BOTH LC_ALL LC_COLLATE
            LC_CTYPE LC_MONETARY LC_NUMERIC LC_TIME LC_MESSAGES
            FILE_USE_INCLUDE_PATH FILE_IGNORE_NEW_LINES FILE_SKIP_EMPTY_LINES
            FILE_APPEND FILE_NO_DEFAULT_CONTEXT LOCK_SH LOCK_EX LOCK_UN
            LOCK_NB SEEK_SET SEEK_CUR SEEK_END GLOB_BRACE GLOB_ONLYDIR
            GLOB_MARK GLOB_NOSORT GLOB_NOCHECK GLOB_NOESCAPE GLOB_ERR
            PATHINFO_DIRNAME PATHINFO_BASENAME PATHINFO_EXTENSION
            PATHINFO_FILENAME SCANDIR_SORT_ASCENDING SCANDIR_SORT_DESCENDING
            SCANDIR_SORT_NONE PASSWORD_DEFAULT PASSWORD_BCRYPT
            PASSWORD_ARGON2I PASSWORD_ARGON2ID PHP_URL_SCHEME PHP_URL_HOST
            PHP_URL_PORT PHP_URL_USER PHP_URL_PASS PHP_URL_PATH
            PHP_URL_QUERY PHP_URL_FRAGMENT PHP_QUERY_RFC1738
            PHP_QUERY_RFC3986 UPLOAD_ERR_OK
        """,
        "ext-random": "MT_RAND_MT19937 MT_RAND_PHP",
        "ext-json": """
            JSON_HEX_TAG JSON_HEX_AMP JSON_HEX_APOS JSON_HEX_QUOT
            JSON_FORCE_OBJECT JSON_NUMERIC_CHECK JSON_UNESCAPED_SLASHES
            JSON_PRETTY_PRINT JSON_UNESCAPED_UNICODE
            JSON_PARTIAL_OUTPUT_ON_ERROR JSON_PRESERVE_ZERO_FRACTION
            JSON_UNESCAPED_LINE_TERMINATORS JSON_OBJECT_AS_ARRAY
            JSON_BIGINT_AS_STRING JSON_INVALID_UTF8_IGNORE
            JSON_INVALID_UTF8_SUBSTITUTE JSON_THROW_ON_ERROR JSON_ERROR_NONE
            JSON_ERROR_DEPTH JSON_ERROR_SYNTAX JSON_ERROR_UTF8
        """,
        "ext-pcre": """
            PREG_PATTERN_ORDER PREG_SET_ORDER PREG_OFFSET_CAPTURE
            PREG_UNMATCHED_AS_NULL PREG_SPLIT_NO_EMPTY
            PREG_SPLIT_DELIM_CAPTURE PREG_SPLIT_OFFSET_CAPTURE
            PREG_GREP_INVERT PREG_NO_ERROR
        """,
        "ext-date": """
            DATE_ATOM DATE_COOKIE DATE_ISO8601 DATE_RFC822 DATE_RFC850
            DATE_RFC1036 DATE_RFC1123 DATE_RFC7231 DATE_RFC2822 DATE_RFC3339
            DATE_RFC3339_EXTENDED DATE_RSS DATE_W3C
        """,
        "ext-filter": """
            FILTER_VALIDATE_INT FILTER_VALIDATE_BOOLEAN FILTER_VALIDATE_BOOL
            FILTER_VALIDATE_FLOAT FILTER_VALIDATE_REGEXP FILTER_VALIDATE_URL
            FILTER_VALIDATE_EMAIL FILTER_VALIDATE_IP FILTER_DEFAULT
            FILTER_NULL_ON_FAILURE FILTER_FLAG_ALLOW_FRACTION
        """,
        "ext-mbstring": "MB_CASE_UPPER MB_CASE_LOWER MB_CASE_TITLE",
        "ext-curl": """
            CURLOPT_URL CURLOPT_RETURNTRANSFER CURLOPT_POST CURLOPT_POSTFIELDS
            CURLOPT_HTTPHEADER CURLOPT_TIMEOUT CURLOPT_FOLLOWLOCATION
            CURLINFO_HTTP_CODE
        """,
        "ext-openssl": "OPENSSL_RAW_DATA OPENSSL_ZERO_PADDING",
        "ext-libxml": "LIBXML_NOENT LIBXML_NONET LIBXML_NOCDATA LIBXML_NOERROR",
    },
    lower=False,
)

_TABLES = {
    SymbolKind.CLASSLIKE: CLASS_EXTENSIONS,
    SymbolKind.FUNCTION: FUNCTION_EXTENSIONS,
    SymbolKind.CONSTANT: CONSTANT_EXTENSIONS,
}


def _lookup(name: str, kind: SymbolKind) -> Optional[str]:
    key = name if kind is SymbolKind.CONSTANT else name.lower()
    return _TABLES[kind].get(key)


def is_builtin(name: str, kind: SymbolKind) -> bool:
    """Whether name is always available in PHP for the given kind.

    True for type keywords, the classes Composer injects at runtime and the
    symbols of core extensions. Symbols of optional extensions are not
    builtins, see extension_of().

    Args:
        name: Fully qualified name without leading separator.
        kind: Symbol table of the usage.
    """
    if kind is SymbolKind.CONSTANT and name.upper() in ("TRUE", "FALSE", "NULL"):
        return True
    if kind is SymbolKind.CLASSLIKE:
        lowered = name.lower()
        if lowered in PSEUDO_TYPES or lowered in COMPOSER_RUNTIME_CLASSES:
            return True
    return _lookup(name, kind) in CORE_EXTENSIONS


def extension_of(name: str, kind: SymbolKind) -> Optional[str]:
    """The ``ext-*`` requirement providing name, None unless an optional extension does.

    Args:
        name: Fully qualified name without leading separator.
        kind: Symbol table of the usage.
    """
    extension = _lookup(name, kind)
    if extension is None or extension in CORE_EXTENSIONS:
        return None
    return extension
